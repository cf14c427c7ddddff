import logging
import os

# This module provides a consistent logging interface for the engine

def get_logger():
   # Create and configure the logger
   logger = logging.getLogger("hunkwise")

   # Remove any existing handlers
   logger.handlers.clear()

   # Prevent propagation to the root logger to avoid duplicate logs
   logger.propagate = False

   formatter = logging.Formatter("\033[36mHUNKWISE\033[0m: %(levelname)-8s %(message)s")
   handler = logging.StreamHandler()
   handler.setFormatter(formatter)
   logger.addHandler(handler)

   # Set level from environment or default to INFO
   logger.setLevel(os.environ.get('HUNKWISE_LOG_LEVEL', 'INFO').upper())
   return logger

def configure_third_party_logging():
   """Suppress verbose logging from third-party libraries"""
   # Suppress asyncio errors unless debug mode
   if os.environ.get('HUNKWISE_LOG_LEVEL', 'INFO').upper() != 'DEBUG':
       logging.getLogger('asyncio').setLevel(logging.WARNING)

   # Pillow logs every plugin it probes at debug level
   logging.getLogger('PIL').setLevel(logging.WARNING)

logger = get_logger()
configure_third_party_logging()
