#!/usr/bin/env python3
"""
Art Que Post-Processing API Server
Wraps the sticker pipeline behind a single JSON endpoint and serves the results.
"""

import base64
import binascii
import logging
from pathlib import Path

from flask import Flask, jsonify, request, send_file
from flask_cors import CORS
from werkzeug.utils import secure_filename

from . import config
from .errors import ExternalServiceError, MalformedInputError
from .models.pipeline_parameters import PipelineOptions
from .pipeline.sticker_postprocessor import process_image_buffer
from .repositories.blob_repository import BlobRepository
from .repositories.image_repository import ImageRepository

logger = logging.getLogger(__name__)


def _flag(body: dict, key: str, default: bool) -> bool:
    """Missing or null JSON flags fall back to the default."""
    value = body.get(key)
    return default if value is None else bool(value)


def create_app(blob_repository: BlobRepository = None,
               image_repository: ImageRepository = None,
               background_service=None) -> Flask:
    """Build the Flask app. Collaborators can be swapped in for tests."""
    app = Flask(__name__)
    CORS(app)  # dashboard runs on a different origin

    app.config['MAX_CONTENT_LENGTH'] = config.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    blobs = blob_repository or BlobRepository()
    images = image_repository or ImageRepository()

    def _error(message: str, status: int):
        return jsonify({'error': message}), status

    @app.route('/api/postprocess-image', methods=['POST'])
    def postprocess_image():
        """Run the sticker pipeline on a URL or base64 image and store the PNG."""
        try:
            body = request.get_json(silent=True) or {}
            image_url = body.get('image_url')
            image_b64 = body.get('image_buffer_base64')

            if not image_url and not image_b64:
                return _error('image_url or image_buffer_base64 is required', 400)

            options = PipelineOptions(
                skip_background_removal=_flag(body, 'skipBackgroundRemoval', True),
                use_advanced_processing=_flag(body, 'useAdvancedProcessing', True),
            )

            if image_b64:
                logger.info("📥 Using provided image buffer")
                try:
                    image_bytes = base64.b64decode("".join(str(image_b64).split()), validate=True)
                except (binascii.Error, ValueError):
                    return _error('image_buffer_base64 is not valid base64', 400)
            else:
                try:
                    image_bytes = images.fetch(image_url)
                except ExternalServiceError as e:
                    logger.error(f"Download failed: {e}")
                    return _error('Failed to download image from URL', 502)

            result = process_image_buffer(image_bytes, options, background_service=background_service)

            url = blobs.put(result.png)
            logger.info(f"✅ Upload complete: {url}")

            return jsonify({
                'success': True,
                'url': url,
                'metadata': result.to_metadata(),
            })

        except MalformedInputError as e:
            logger.error(f"Malformed input: {e}")
            return _error(str(e), 400)
        except ExternalServiceError as e:
            logger.error(f"External service error: {e}")
            return _error(str(e), 502)
        except Exception as e:
            logger.exception(f"💥 Post-processing error: {e}")
            return _error(str(e) or 'Internal server error', 500)

    @app.route('/api/image/<filename>')
    def serve_image(filename):
        """Serve processed images."""
        image_path = blobs.path_for(secure_filename(filename))
        if image_path.is_file():
            return send_file(Path(image_path).resolve(), mimetype='image/png')
        return _error('Image not found', 404)

    @app.route('/api/health', methods=['GET'])
    def health_check():
        """Health check endpoint."""
        return jsonify({
            'status': 'healthy',
            'message': 'Art Que post-processing API is running',
            'fal_configured': bool(config.FAL_KEY),
        })

    @app.errorhandler(413)
    def too_large(e):
        return _error(f'File too large. Maximum size is {config.MAX_UPLOAD_SIZE_MB}MB.', 413)

    return app


def main():
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format=config.LOG_FORMAT,
        datefmt=config.LOG_DATEFMT,
    )
    app = create_app()
    print("🚀 Starting Art Que Post-Processing API Server...")
    print(f"📁 Results directory: {config.RESULTS_FOLDER}")
    print(f"🔧 Max upload size: {config.MAX_UPLOAD_SIZE_MB}MB")
    print("="*60)
    app.run(host='0.0.0.0', port=config.PORT, debug=False)


if __name__ == '__main__':
    main()
