import asyncio
import logging
import sys
from typing import Optional

from hn_sort_validator.config import ConfigStore, Settings, get_settings
from hn_sort_validator.services.browser import BrowserSession
from hn_sort_validator.services.lifecycle import RunLifecycle


logger = logging.getLogger("hn_sort_validator")


def configure_logging(settings: Settings) -> None:
    level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] %(levelname)s %(name)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    # Tame noisy libraries
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("playwright").setLevel(logging.WARNING)


def create_lifecycle(settings: Settings) -> RunLifecycle:
    interactive = settings.interactive
    if settings.headless and interactive:
        logger.warning("⚠️ Headless browser cannot show the settings UI, running non-interactively.")
        interactive = False

    return RunLifecycle(
        session=BrowserSession(headless=settings.headless, channel=settings.browser_channel),
        store=ConfigStore(settings.default_run_config()),
        interactive=interactive,
        title=settings.app_name,
    )


async def run(settings: Optional[Settings] = None) -> int:
    settings = settings or get_settings()
    lifecycle = create_lifecycle(settings)
    return await lifecycle.run()


def main() -> None:
    settings = get_settings()
    configure_logging(settings)
    sys.exit(asyncio.run(run(settings)))


if __name__ == "__main__":
    main()
