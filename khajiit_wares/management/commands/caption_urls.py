import logging
import re

from pathlib import Path

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from khajiit_wares import config
from khajiit_wares.engine import ALT_TEXT, compose
from khajiit_wares.errors import EngineError, SourceError
from khajiit_wares.meme_text_renderer import load_font
from khajiit_wares.models import ProcessedItem
from khajiit_wares.sources import load_url

logger = logging.getLogger(__name__)

KEY_PATTERN = re.compile(r"[\w.-]+")


def parse_item(item: str) -> tuple[str, str]:
    key, sep, url = item.partition("=")
    if not sep or not key or not url:
        raise CommandError(f"Expected KEY=URL, got {item!r}")
    if not KEY_PATTERN.fullmatch(key):
        raise CommandError(f"Invalid key {key!r}, expected characters from [A-Za-z0-9_.-]")
    return key, url


class Command(BaseCommand):
    help = (
        "Caption new source images and write them, with alt text, to an output directory. "
        "With DRY_RUN set, items are still claimed, fetched and captioned but nothing is written."
    )

    def add_arguments(self, parser):
        parser.add_argument("items", nargs="+", metavar="KEY=URL")
        parser.add_argument("--output-dir", default=".", type=Path)
        parser.add_argument("--font", default=None, help="TrueType font to caption with.")

    def handle(self, *args, **options):
        items = [parse_item(item) for item in options["items"]]
        output_dir: Path = options["output_dir"]
        font = load_font(options["font"] or settings.CAPTION_FONT_PATH)
        dry_run = settings.DRY_RUN

        if not dry_run:
            output_dir.mkdir(parents=True, exist_ok=True)

        failed = 0
        for key, url in items:
            if not ProcessedItem.insert(key):
                logger.debug("Skipping already processed item %s", key)
                continue

            logger.info("Processing new item %s from %s", key, url)
            try:
                jpeg = compose(load_url(url), config.TOP_TEXT, config.BOTTOM_TEXT, font)
            except (SourceError, EngineError) as error:
                logger.error("Failed to caption %s: %s", key, error)
                failed += 1
                continue

            if dry_run:
                logger.info("Dry run, not publishing %s (%d bytes)", key, len(jpeg))
                continue

            try:
                (output_dir / f"{key}.jpg").write_bytes(jpeg)
                (output_dir / f"{key}.txt").write_text(ALT_TEXT + "\n", encoding="utf-8")
            except OSError as error:
                logger.error("Failed to publish %s: %s", key, error)
                failed += 1
                continue
            self.stdout.write(f"Wrote {key}.jpg ({len(jpeg)} bytes)")

        if failed:
            raise CommandError(f"{failed} item(s) failed")
