import logging

"""
Shared logger for the SDK. Default level is INFO, sent to stderr with a StreamHandler
"""

logger = logging.getLogger("ajna_sdk")
logger.propagate = False
logger.setLevel(logging.INFO)
logger.addHandler(logging.StreamHandler())
