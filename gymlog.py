import logging
from app import create_app

logger = logging.getLogger(__name__)

app = create_app()
logger.debug("GymLog-app aangemaakt")

if __name__ == '__main__':
    app.run(host='0.0.0.0', port=5000, debug=app.config['DEBUG'])
