"""Application factory and initialization"""
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate
from config import config

db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()

def create_app(config_name='default'):
    """Create and configure the Flask application"""
    app = Flask(__name__)
    app.config.from_object(config[config_name])

    from stashbook.utils.log_config import setup_logging
    setup_logging(app)

    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)

    # API clients get a JSON 401 instead of a login redirect
    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': 'Unauthorized'}), 401

    # Register blueprints
    from stashbook.auth import auth_bp
    from stashbook.dashboard import dashboard_bp
    from stashbook.borrowers import borrowers_bp
    from stashbook.owners import owners_bp
    from stashbook.stashes import stashes_bp
    from stashbook.loans import loans_bp
    from stashbook.repayments import repayments_bp
    from stashbook.transactions import transactions_bp
    from stashbook.users import users_bp
    from stashbook.activities import activities_bp

    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(dashboard_bp, url_prefix='/api/dashboard')
    app.register_blueprint(borrowers_bp, url_prefix='/api/borrowers')
    app.register_blueprint(owners_bp, url_prefix='/api/owners')
    app.register_blueprint(stashes_bp, url_prefix='/api/stashes')
    app.register_blueprint(loans_bp, url_prefix='/api/loans')
    app.register_blueprint(repayments_bp, url_prefix='/api/repayments')
    app.register_blueprint(transactions_bp, url_prefix='/api/transactions')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(activities_bp, url_prefix='/api/activities')

    register_error_handlers(app)

    @app.route('/health')
    def health():
        return jsonify({'status': 'ok', 'service': app.config['SERVICE_NAME']})

    return app

def register_error_handlers(app):
    """Return JSON bodies for HTTP errors"""
    messages = {
        400: 'Bad request',
        401: 'Unauthorized',
        403: 'Forbidden',
        404: 'Not found',
        405: 'Method not allowed',
    }

    def make_handler(status, message):
        def handler(error):
            return jsonify({'error': message}), status
        return handler

    for status, message in messages.items():
        app.register_error_handler(status, make_handler(status, message))

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        app.logger.error('Unhandled error', exc_info=getattr(error, 'original_exception', error))
        return jsonify({'error': 'Internal server error'}), 500
