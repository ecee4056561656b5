"""Request a 300 DPI PNG and wait for it with create_content_and_poll.

High resolution renders take longer, so the poll budget is raised to
40 rounds of 3 seconds.

    python examples/create_png_high_res.py
"""
import asyncio
import time

from rich import print

from personalia.client import PersonaliaClient
from personalia.core.exceptions import PersonaliaError
from personalia.core.logging_config import configure_logging
from personalia.core.models.content import CreateContentRequest, OutputOptions
from personalia.core.settings import app_settings

FIELDS = {
    "Product": "iron",
    "Offer": "20%",
    "Price": "$25",
    "Expiry Date": "2025-04-01",
    "Color": "blue",
    "Switch Sides": "0",
}


async def main():
    configure_logging(app_settings.PERSONALIA_LOG_LEVEL)

    request = CreateContentRequest(
        TemplateId=app_settings.PERSONALIA_TEMPLATE_ID,
        Fields=FIELDS,
        Output=OutputOptions(Format="PNG", Quality="Display", Resolution=300, StrictPolicy=True),
    )
    print(request.to_payload())

    started = time.monotonic()
    async with PersonaliaClient.from_settings() as client:
        try:
            content = await client.create_content_and_poll(request, max_attempts=40, interval=3000)
        except PersonaliaError as exc:
            print(f"[red]{exc}[/red]")
            if exc.request_id:
                print(f"Check it later with: await client.get_content({exc.request_id!r})")
            return

    print(f"Content ready after {time.monotonic() - started:.2f} seconds")
    if not content.URLs:
        print("[red]No URLs found in the response[/red]")
        return
    print(f"[bold]PNG URL:[/bold] {content.URLs[0]} (300 DPI)")


if __name__ == "__main__":
    asyncio.run(main())
