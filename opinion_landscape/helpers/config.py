import logging
import os


def _env_bool(name, default):
	return os.environ.get(name, default).lower() in ('1', 'true', 'yes')


class Config:
	def __getitem__(self, item):
		return getattr(self, item)
	# Canvas used when projecting cluster points into rendering coordinates
	CANVAS_WIDTH = int(os.environ.get('LANDSCAPE_CANVAS_WIDTH', '800'))
	CANVAS_HEIGHT = int(os.environ.get('LANDSCAPE_CANVAS_HEIGHT', '600'))
	PROJECT_TO_CANVAS = _env_bool('LANDSCAPE_PROJECT_TO_CANVAS', 'false')
	# Fractional padding added around the point bounds before projection
	CANVAS_PADDING_X = 0.15
	CANVAS_PADDING_Y = 0.20
	LOG_LEVEL = os.environ.get('LANDSCAPE_LOG_LEVEL', 'INFO')

class DevelopmentConfig(Config):
	DEV = True
	LOG_LEVEL = os.environ.get('LANDSCAPE_LOG_LEVEL', 'DEBUG')

class ProductionConfig(Config):
	DEV = False


def get_config():
	if os.environ.get('LANDSCAPE_ENV') == 'dev':
		return DevelopmentConfig()
	return ProductionConfig()


def configure_logging(config=None):
	"""Apply config.LOG_LEVEL to the opinion_landscape logger hierarchy."""
	config = config or get_config()
	logging.getLogger('opinion_landscape').setLevel(config.LOG_LEVEL.upper())
