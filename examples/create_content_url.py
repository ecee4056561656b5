"""Create a content on-demand URL that renders the template when opened.

    python examples/create_content_url.py
"""
import asyncio

from rich import print

from personalia.client import PersonaliaClient
from personalia.core.logging_config import configure_logging
from personalia.core.models.content import CreateContentRequest, OutputOptions
from personalia.core.settings import app_settings

FIELDS = {
    "Product": "iron",
    "Offer": "20%",
    "Price": "$25",
    "Expiry Date": "2025-04-01",
    "Color": "green",
    "Switch Sides": "0",
}


async def main():
    configure_logging(app_settings.PERSONALIA_LOG_LEVEL)
    request = CreateContentRequest(
        TemplateId=app_settings.PERSONALIA_TEMPLATE_ID,
        Fields=FIELDS,
        # only PDF is supported for content URLs
        Output=OutputOptions(Format="PDF", Quality="Display"),
    )
    async with PersonaliaClient.from_settings() as client:
        created = await client.create_content_url(request)

    print(f"[bold]URL:[/bold] {created.Url}")
    print(f'<iframe src="{created.Url}" width="100%" height="500px" frameborder="0"></iframe>')


if __name__ == "__main__":
    asyncio.run(main())
