"""List the input fields of a template.

Run with PERSONALIA_API_KEY and PERSONALIA_TEMPLATE_ID set (environment or .env):

    python examples/get_template_fields.py
"""
import asyncio

from rich import print
from rich.table import Table

from personalia.client import PersonaliaClient
from personalia.core.logging_config import configure_logging
from personalia.core.settings import app_settings, logger


async def main():
    configure_logging(app_settings.PERSONALIA_LOG_LEVEL)
    app_settings.print_settings(logger)
    async with PersonaliaClient.from_settings() as client:
        info = await client.get_template_info(app_settings.PERSONALIA_TEMPLATE_ID)

    table = Table(title=f"Template {info.TemplateId or app_settings.PERSONALIA_TEMPLATE_ID}")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Description")
    for field in info.Fields:
        table.add_row(field.Name, field.Type or "", field.Description or "")
    print(table)


if __name__ == "__main__":
    asyncio.run(main())
