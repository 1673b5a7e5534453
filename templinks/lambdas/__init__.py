from templinks.utils.logging import initialize_logging


initialize_logging()
