"""FastAPI server receiving Slack events."""

import json
import logging
from typing import Optional

import uvicorn
from fastapi import BackgroundTasks, FastAPI, Request
from fastapi.responses import PlainTextResponse
from slack_sdk.signature import SignatureVerifier

from ..agent.chat_handler import ChatHandler
from ..digest.scheduler import DailyDigestScheduler
from ..slack.event_extractor import EventExtractor

logger = logging.getLogger(__name__)


class SlackEventServer:
    """HTTP endpoint for the Slack Events API plus liveness and manual digest routes."""

    def __init__(
        self,
        signing_secret: str,
        extractor: EventExtractor,
        chat_handler: ChatHandler,
        digest: Optional[DailyDigestScheduler] = None,
        host: str = "0.0.0.0",
        port: int = 3006,
        verifier: Optional[SignatureVerifier] = None,
    ):
        self.host = host
        self.port = port
        self.extractor = extractor
        self.chat_handler = chat_handler
        self.digest = digest
        self.verifier = verifier or SignatureVerifier(signing_secret)
        self.app = FastAPI(title="Calendar Assistant")
        self._server: Optional[uvicorn.Server] = None

        self._setup_routes()

    def _setup_routes(self):
        """Configure FastAPI routes."""

        @self.app.get("/", response_class=PlainTextResponse)
        async def index():
            return "Calendar bot is running!"

        @self.app.get("/trigger-summary", response_class=PlainTextResponse)
        async def trigger_summary():
            """Run the daily summary now for every configured user."""
            logger.info("Manual daily summary trigger")
            if self.digest is None:
                return PlainTextResponse("Daily summary is not configured", status_code=500)
            try:
                await self.digest.send_all()
            except Exception as e:
                logger.error(f"Manual trigger error: {e}", exc_info=True)
                return PlainTextResponse(str(e), status_code=500)
            return "Daily summary triggered"

        @self.app.post("/slack/events")
        async def slack_events(request: Request, background_tasks: BackgroundTasks):
            """Acknowledge a Slack event at once and handle it in the background."""
            raw_body = (await request.body()).decode("utf-8")
            try:
                payload = json.loads(raw_body) if raw_body else {}
            except json.JSONDecodeError:
                return PlainTextResponse("Invalid JSON", status_code=400)

            if payload.get("type") == "url_verification":
                return PlainTextResponse(payload.get("challenge", ""))

            if not self._is_signed(raw_body, request):
                logger.error("Invalid Slack signature")
                return PlainTextResponse("Invalid signature", status_code=401)

            message = self.extractor.extract(payload)
            if message is not None:
                background_tasks.add_task(self.chat_handler.handle, message)
            return PlainTextResponse("ok")

    def _is_signed(self, raw_body: str, request: Request) -> bool:
        try:
            return self.verifier.is_valid(
                body=raw_body,
                timestamp=request.headers.get("X-Slack-Request-Timestamp"),
                signature=request.headers.get("X-Slack-Signature"),
            )
        except ValueError:
            # Non-numeric timestamp header
            return False

    async def start(self) -> None:
        """Serve until stop() is called."""
        config = uvicorn.Config(
            self.app,
            host=self.host,
            port=self.port,
            log_level="warning",
            access_log=False,
        )
        self._server = uvicorn.Server(config)
        logger.info(f"Server running on port {self.port}")
        await self._server.serve()

    async def stop(self) -> None:
        if self._server:
            self._server.should_exit = True

    def get_url(self) -> str:
        return f"http://{self.host}:{self.port}"
