import logging
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_session import Session
from config import Config

logger = logging.getLogger(__name__)

# Initialiseer extensies globaal voor gebruik in de applicatiefactory
db = SQLAlchemy()
migrate = Migrate()
login = LoginManager()
sess = Session()


@login.request_loader
def load_user_from_request(request):
    # Laad de gebruiker op basis van het bearer-token in de Authorization-header.
    from app.auth.tokens import user_from_authorization  # Import hier om circulaire imports te vermijden
    return user_from_authorization(request.headers.get('Authorization'))


@login.unauthorized_handler
def unauthorized():
    logger.debug("Verzoek zonder geldig token geweigerd")
    return jsonify({'success': False, 'message': 'Se requiere iniciar sesión.'}), 401


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(level=app.config.get('LOG_LEVEL', 'INFO'))

    # Initialiseer extensies met de app
    db.init_app(app)  # Database-ORM
    migrate.init_app(app, db)  # Database-migraties
    login.init_app(app)  # Token-authenticatie
    sess.init_app(app)  # Server-side sessies voor het trainingslog

    # Registreer blueprints voor routes en errorhandling
    from app.errors import bp as errors_bp
    from app.auth import bp as auth_bp
    from app.catalog import bp as catalog_bp
    from app.routines import bp as routines_bp
    from app.workouts import bp as workouts_bp
    from app.workout_log import bp as workout_log_bp
    app.register_blueprint(errors_bp)
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(catalog_bp, url_prefix='/api/exercises')
    app.register_blueprint(routines_bp, url_prefix='/api/routines')
    app.register_blueprint(workouts_bp, url_prefix='/api/workouts')
    app.register_blueprint(workout_log_bp, url_prefix='/api/workout-log')

    # Importeer modellen om database-tabellen te registreren
    from app import models

    logger.debug(f"App aangemaakt met database {app.config['SQLALCHEMY_DATABASE_URI']}")
    return app
