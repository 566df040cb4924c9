#!/usr/bin/env python3
"""
Translation Gateway Server

Starts the Flask development server for the translation gateway.
"""

import logging

from translation_gateway.config import get_config
from translation_gateway.server import create_app


logger = logging.getLogger(__name__)


if __name__ == '__main__':
    config = get_config()
    app = create_app(config)

    logger.info(f"Starting Translation Gateway at http://{config.server.host}:{config.server.port}")
    logger.info("Routes:")
    for rule in sorted(app.url_map.iter_rules(), key=lambda r: r.rule):
        if rule.endpoint != 'static':
            logger.info(f"   - {','.join(sorted(rule.methods - {'HEAD', 'OPTIONS'}))} {rule.rule}")

    app.run(
        host=config.server.host,
        port=config.server.port,
        debug=config.debug
    )
