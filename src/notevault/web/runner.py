"""Uvicorn server runner."""

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from notevault.app import App
from notevault.config import Config
from notevault.web.server import create_fastapi_app


def run_server(app: App, config: Config) -> None:
    """Serve the API; client addresses come from X-Forwarded-For only for trusted proxies."""
    fastapi_app = create_fastapi_app(app, config)

    log_config = LOGGING_CONFIG.copy()
    log_config["formatters"]["access"]["fmt"] = '%(asctime)s - %(client_addr)s - "%(request_line)s" %(status_code)s'

    uvicorn.run(
        fastapi_app,
        host=config.host,
        port=config.port,
        log_config=log_config,
        access_log=config.debug,
        proxy_headers=True,
        forwarded_allow_ips=config.forwarded_allow_ips,
        server_header=False,
    )
