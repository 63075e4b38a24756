import logging
from leadradar.db.session import ENGINE, current_engine_url
from leadradar.db.models import Base

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

def main():
    logger.info("Initializing leads schema on %s...", current_engine_url())
    Base.metadata.create_all(bind=ENGINE)
    logger.info("Leads schema initialized successfully.")

if __name__ == "__main__":
    main()
