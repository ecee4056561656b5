"""Request a print-quality PDF and wait for it to be rendered.

Ctrl+C cancels the poll between rounds.

    python examples/create_pdf_print.py
"""
import asyncio
import signal
import time

from rich import print

from personalia.client import PersonaliaClient
from personalia.core.exceptions import PersonaliaApiError, PollingCancelledError, PollingTimeoutError
from personalia.core.logging_config import configure_logging
from personalia.core.models.content import CreateContentRequest, OutputOptions
from personalia.core.settings import app_settings

FIELDS = {
    "Product": "iron",
    "Offer": "20%",
    "Price": "$25",
    "Expiry Date": "2025-04-01",
    "Color": "red",
    "Switch Sides": "0",
}


async def main():
    configure_logging(app_settings.PERSONALIA_LOG_LEVEL)
    cancel = asyncio.Event()
    asyncio.get_running_loop().add_signal_handler(signal.SIGINT, cancel.set)

    request = CreateContentRequest(
        TemplateId=app_settings.PERSONALIA_TEMPLATE_ID,
        Fields=FIELDS,
        Output=OutputOptions(Format="PDF", Quality="Print", StrictPolicy=True),
    )
    started = time.monotonic()
    async with PersonaliaClient.from_settings() as client:
        try:
            content = await client.create_content_and_poll(
                request, max_attempts=15, interval=2000, cancel_event=cancel
            )
        except PersonaliaApiError as exc:
            print(f"[red]{exc}[/red]")
            if exc.remediation:
                print(f"[yellow]Fix:[/yellow] {exc.remediation}")
            return
        except (PollingTimeoutError, PollingCancelledError) as exc:
            print(f"[yellow]{exc}[/yellow]")
            return

    print(f"Content ready after {time.monotonic() - started:.2f} seconds")
    for url in content.URLs or []:
        print(f"[bold]PDF URL:[/bold] {url}")


if __name__ == "__main__":
    asyncio.run(main())
