# Run periodically (cron / Cloud Scheduler): python -m catering_api.jobs.expire_coupons
import logging

from sqlmodel import Session

from catering_api.database import engine
from catering_api.services.coupon_service import expire_coupons

logger = logging.getLogger(__name__)


def run() -> int:
    with Session(engine) as session:
        expired = expire_coupons(session)
    logger.info(f"Expired {expired} coupons")
    return expired


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run()
