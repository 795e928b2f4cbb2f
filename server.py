"""
Flask Server for the Image Proxy Rewriter

This is the main entry point for the Flask application.
The server provides REST API endpoints for:
1. Rewriting image URLs in HTML documents through the image proxy
2. Classifying single image URLs (cover and top images)
3. Inspecting the active proxy configuration
4. Health and cache monitoring
"""

from image_proxy import create_app
from image_proxy.config import Config

# Create Flask application using the application factory pattern
app = create_app()

if __name__ == '__main__':
    # Start the development server
    app.run(
        host=Config.HOST,
        port=Config.PORT,
        debug=Config.DEBUG,
        threaded=True
    )
