#!/usr/bin/env python3
import os
import sys
import time
import requests
from datetime import datetime

# Add the project root to the path
script_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(script_dir)
sys.path.insert(0, project_root)

from rewards_viewer.config import load_config
from rewards_viewer.starknet_rpc import RPCError, StarknetRPC


def check_rpc_health(url, timeout=10):
    """Check if the node is responsive and report chain id, head block and latency."""
    rpc = StarknetRPC(url, timeout=timeout)
    started = time.time()

    try:
        chain_id = rpc.chain_id()
        block_number = rpc.block_number()
    except RPCError as e:
        return False, f"RPC error: {e.error}"
    except requests.exceptions.RequestException as e:
        return False, f"Connection error: {e}"

    latency_ms = (time.time() - started) * 1000
    return True, f"chain {chain_id}, block {block_number}, {latency_ms:.0f} ms"


def main():
    print(f"Rewards Viewer RPC Health Check - {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print("=" * 60)

    config = load_config(sys.argv[1] if len(sys.argv) > 1 else None)
    url = config['rpc']['url']

    print(f"Checking {url}...", end="", flush=True)
    is_healthy, message = check_rpc_health(url, timeout=config['rpc']['timeout'])

    if is_healthy:
        print(f" ✅ Healthy ({message})")
        return 0

    print(f" ❌ Error: {message}")
    print("\nTroubleshooting tips:")
    print("1. Check STARKNET_RPC_URL in your .env or config file")
    print("2. Verify the node supports the starknet_chainId and starknet_blockNumber methods")
    print("3. Check your network connection")
    return 1


if __name__ == "__main__":
    sys.exit(main())
