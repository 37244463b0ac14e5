# web_server.py: JSON endpoints for points and collectible contracts

from flask import Flask, Response
import threading
import logging

from .metadata.render import metadata_entries, metadata_tree, render_metadata, token_display_name

app = Flask(__name__)

logger = logging.getLogger('rewards_viewer.web')


def configure_app(service):
    """Attach the ContractService used by the routes"""
    app.config["CONTRACT_SERVICE"] = service
    return app


def json_response(payload, status=200):
    """Serialize through render_metadata so big integers stay exact"""
    return Response(render_metadata(payload), status=status, mimetype='application/json')


def _service():
    service = app.config.get("CONTRACT_SERVICE")
    if service is None:
        raise RuntimeError("Contract service not configured; call configure_app() first")
    return service


@app.route('/health', methods=['GET'])
def health():
    return json_response({"status": "ok"})


@app.route('/points/<address>', methods=['GET'])
def points_contract(address):
    details = _service().get_points_details(address)
    if details is None:
        return json_response({"error": "Failed to fetch points contract details"}, 404)
    return json_response(details)


@app.route('/collectibles/<address>', methods=['GET'])
def collectible_contract(address):
    details = _service().get_collectible_details(address)
    if details is None:
        return json_response({"error": "Failed to fetch collectible contract details"}, 404)

    details["metadata_tree"] = metadata_tree(dict(metadata_entries(details["metadata"])))
    return json_response(details)


@app.route('/collectibles/<address>/token/<token_id>', methods=['GET'])
def collectible_token(address, token_id):
    data = _service().get_token_data(token_id, address)
    if data is None:
        return json_response({"error": "Failed to fetch token details"}, 404)

    data["display_name"] = token_display_name(data["metadata"], data["token_id"])
    return json_response(data)


def start_web_server(host='0.0.0.0', port=8080):
    """Start the web server in a separate thread"""
    def run_server():
        app.run(host=host, port=port, debug=False, use_reloader=False)

    server_thread = threading.Thread(target=run_server)
    server_thread.daemon = True
    server_thread.start()
    logger.info(f"Rewards viewer started at http://{host}:{port}")
    return server_thread
