"""Global logging and error handling utilities"""
import logging
import sys
import traceback
from PyQt5.QtWidgets import QMessageBox

# Detect debug mode - True if running from source, False if packaged
DEBUG_MODE = not getattr(sys, 'frozen', False)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

logger = logging.getLogger(__name__)

_main_window = None

def configure_logging(verbose=False):
	"""Configure root logging the same way for every entry point"""
	logging.basicConfig(
		level=logging.DEBUG if verbose else logging.WARNING,
		format=LOG_FORMAT,
		handlers=[logging.StreamHandler(sys.stdout)],
	)

def set_main_window(window):
	"""Set the main window reference for showing popups"""
	global _main_window
	_main_window = window

def set_debug_mode(enabled):
	"""Override debug mode (tests and the --release flag)"""
	global DEBUG_MODE
	DEBUG_MODE = enabled

def loggerRaise(e: Exception, user_message: str = None, title: str = "Error"):
	"""Handle exceptions with optional popup in release mode

	Args:
		e: The exception to handle
		user_message: User-friendly message to show in popup (optional)
		title: Title for the popup dialog

	In DEBUG_MODE:
		- Just raises the exception (shows full traceback)

	In RELEASE_MODE:
		- Logs the full traceback
		- Shows popup with user message or exception string
		- Then raises the exception
	"""
	if DEBUG_MODE:
		raise e

	tb = ''.join(traceback.format_exception(type(e), e, e.__traceback__))
	logger.error("%s: %s", title, tb)

	message = user_message if user_message else str(e)
	if _main_window:
		QMessageBox.critical(_main_window, title, message)
	else:
		logger.error("Error popup (no window): %s - %s", title, message)

	# Re-raise so application can handle it appropriately
	raise e
