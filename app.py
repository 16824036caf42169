from flask import Flask
from flask_cors import CORS
from dotenv import load_dotenv

from config.settings import Config
from utils.logger import setup_logging
from routes.analysis_route import analysis_bp
from routes.research_route import research_bp
from routes.export_route import export_bp
from routes.comparison_route import comparison_bp
from routes.health_route import health_bp


def create_app() -> Flask:
    # Load environment variables
    load_dotenv()
    setup_logging()

    app = Flask(__name__)

    CORS(app,
         origins=Config.CORS_ORIGINS,
         methods=Config.CORS_METHODS,
         allow_headers=["Content-Type", "Authorization", "X-Requested-With"])

    # Register Blueprints
    app.register_blueprint(analysis_bp)
    app.register_blueprint(research_bp, url_prefix='/research')
    app.register_blueprint(export_bp, url_prefix='/export')
    app.register_blueprint(comparison_bp, url_prefix='/ideas')
    app.register_blueprint(health_bp)

    return app


app = create_app()

if __name__ == '__main__':
    app.run(host=Config.FLASK_HOST, port=Config.FLASK_PORT, debug=Config.FLASK_DEBUG)
