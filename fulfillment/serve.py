"""Service Entry Points — run each app factory under uvicorn on its configured port.

Invariants:
    - One process per service; ports and host come from Settings
"""

import uvicorn

from fulfillment.config import get_settings


def _run(factory: str, port: int) -> None:
    settings = get_settings()
    uvicorn.run(
        f"fulfillment.main:{factory}",
        factory=True,
        host=settings.host,
        port=port,
        log_config=None,
    )


def run_order_service() -> None:
    _run("create_order_app", get_settings().order_service_port)


def run_inventory_service() -> None:
    _run("create_inventory_app", get_settings().inventory_service_port)


def run_gateway() -> None:
    _run("create_gateway_app", get_settings().gateway_port)
