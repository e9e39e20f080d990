"""
Local HTTP bridge between the browser plotter and the .trk decoder.

Usage: python tools/trk_bridge_server.py [--host 127.0.0.1] [--port 5000]

  POST /trk-bridge/decode   multipart field `trk` (the .trk file),
                            optional form fields `x` and `y` (axis names)
                            -> JSON summary (+ points when x and y are given)
  GET  /trk-bridge/health   -> {"status": "ok"}
"""
import argparse
import logging
import os
import sys

from flask import Flask, request, jsonify

# Allow running from project root without installing
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from TLDE.TDM.errors import DecodeError
from TLDE.TViz.plot_bridge import decode_trk

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    app = Flask(__name__)

    @app.route('/trk-bridge/decode', methods=['POST'])
    def decode():
        if 'trk' not in request.files:
            return jsonify({'error': 'missing file field `trk`'}), 400
        f = request.files['trk']
        x_name = request.form.get('x') or None
        y_name = request.form.get('y') or None
        try:
            result = decode_trk(f.read(), x_name, y_name)
        except DecodeError as e:
            logger.warning("Rejected %s: %s", f.filename, e)
            return jsonify({'error': e.message, 'kind': e.kind, 'offset': e.offset}), 422
        except KeyError as e:
            return jsonify({'error': e.args[0], 'kind': 'UnknownVariable'}), 404
        logger.info("Decoded %s: %d rows", f.filename, result['row_count'])
        return jsonify(result)

    @app.route('/trk-bridge/health', methods=['GET'])
    def health():
        return jsonify({'status': 'ok'})

    return app


def main() -> None:
    parser = argparse.ArgumentParser(description="Trick log HTTP bridge")
    parser.add_argument('--host', default='127.0.0.1')
    parser.add_argument('--port', type=int, default=5000)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    create_app().run(host=args.host, port=args.port)


if __name__ == '__main__':
    main()
