#!/usr/bin/env python3
import os
import sys
import time
import logging

import requests

from rewards_viewer.config import load_config
from rewards_viewer.contract_service import ContractService
from rewards_viewer.starknet_rpc import RPCError, StarknetRPC
from rewards_viewer.utils.logging import setup_logging
from rewards_viewer.web_server import configure_app, start_web_server

logger = logging.getLogger('rewards_viewer')


class RewardsViewer:
    def __init__(self, config_path=None):
        self.config_path = config_path
        self.load_config()
        self.rpc = StarknetRPC(
            self.config['rpc']['url'],
            timeout=self.config['rpc']['timeout']
        )
        self.service = ContractService(
            self.rpc,
            class_hash_ttl=self.config['cache']['class_hash_ttl_seconds']
        )

    def load_config(self):
        try:
            self.config = load_config(self.config_path)
        except Exception as e:
            logger.error(f"Failed to load configuration: {e}")
            sys.exit(1)

        log_config = self.config['logging']
        setup_logging(
            log_config['dir'],
            log_name=log_config['file'],
            max_size_mb=log_config['max_size_mb'],
            backup_count=log_config['backup_count'],
            level=log_config['level']
        )

    def test_connection(self):
        """Check the RPC node answers before serving requests."""
        try:
            chain_id = self.rpc.chain_id()
            logger.info(f"Connected to {self.rpc.url} (chain id {chain_id})")
            return True
        except (RPCError, requests.exceptions.RequestException) as e:
            logger.error(f"RPC connection test failed: {e}")
            return False

    def start(self):
        logger.info("Starting rewards viewer")
        self.test_connection()

        configure_app(self.service)
        web = self.config['web']
        start_web_server(host=web['host'], port=web['port'])

        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            logger.info("Viewer stopped by user")


def main():
    config_path = sys.argv[1] if len(sys.argv) > 1 else os.getenv('REWARDS_VIEWER_CONFIG')
    RewardsViewer(config_path).start()


if __name__ == "__main__":
    main()
