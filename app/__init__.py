from flask import Flask
from flask_wtf.csrf import CSRFProtect
from dotenv import load_dotenv
import logging

load_dotenv()

csrf = CSRFProtect()

def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object('config')
    if test_config:
        app.config.update(test_config)

    # Validate required settings (environment, or test_config in tests)
    required_vars = ['SECRET_KEY']
    for var in required_vars:
        if not app.config.get(var):
            raise ValueError(f"Required environment variable {var} is not set")

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, app.config.get('LOG_LEVEL', 'INFO'), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Initialize extensions
    csrf.init_app(app)

    # Jinja2 whitespace control
    app.jinja_env.trim_blocks = app.config.get('JINJA2_TRIM_BLOCKS', False)
    app.jinja_env.lstrip_blocks = app.config.get('JINJA2_LSTRIP_BLOCKS', False)

    # Register blueprints
    from app.routes.main import main_bp
    from app.projects.calculator.routes import calculator_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(calculator_bp)  # Has its own url_prefix defined

    # Register CLI commands
    from app.projects.calculator import commands as calculator_commands
    calculator_commands.init_app(app)

    return app
