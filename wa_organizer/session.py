"""Request orchestration for one browser session.

``ProcessingSession`` keeps what the page shows (output, summary, connection
status) and decides when to call Gemini. Only one request runs at a time.
A change that arrives while a request is in flight is parked in a single
pending slot; a newer change overwrites it. When the flight ends the slot is
re-checked against the latest inputs and, if still needed, one "auto" run is
issued.
"""

import hashlib
import json
import logging
from dataclasses import dataclass, field

from .client import GeminiClient
from .errors import MissingInputError, ProcessingError
from .prompts import ProcessingOptions, build_request_text
from .results import split_summary

LOGGER = logging.getLogger(__name__)

TITLE_ERROR = "خطأ"
MISSING_MESSAGES = {
    "input_text": "يرجى إدخال النص المراد معالجته",
    "api_key": "يرجى إدخال مفتاح API الخاص بـ Gemini",
    "api_endpoint": "يرجى إدخال رابط واجهة Gemini API",
}
TITLE_SUCCESS = "تم بنجاح"
MESSAGE_SUCCESS = "تم معالجة الرسائل وترتيبها"
TITLE_PROCESSING_ERROR = "خطأ في المعالجة"
MESSAGE_PROCESSING_ERROR = "حدث خطأ أثناء معالجة الرسائل. يرجى المحاولة مرة أخرى."
MESSAGE_AUTO_ERROR = "فشل تحديث الخيارات تلقائياً. حاول المعالجة يدوياً."
TITLE_CONNECTED = "متصل"
MESSAGE_CONNECTED = "الاتصال مع Gemini API يعمل بشكل صحيح"
TITLE_CONNECTION_ERROR = "خطأ في الاتصال"
MESSAGE_CONNECTION_ERROR = "فشل الاتصال مع Gemini API. تحقق من المفتاح."


@dataclass(frozen=True)
class Notice:
    level: str
    title: str
    message: str

    @classmethod
    def error(cls, title, message):
        return cls("error", title, message)

    @classmethod
    def success(cls, title, message):
        return cls("success", title, message)


@dataclass(frozen=True)
class OrganizeRequest:
    input_text: str
    options: ProcessingOptions = field(default_factory=ProcessingOptions)
    api_key: str = ""
    api_endpoint: str = ""

    def signature(self):
        payload = json.dumps(
            {
                "input": self.input_text,
                "options": self.options.to_dict(),
                "apiKey": self.api_key,
                "apiEndpoint": self.api_endpoint,
            },
            ensure_ascii=False,
            sort_keys=True,
        )
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()

    def missing_fields(self):
        return [name for name in ("input_text", "api_key", "api_endpoint") if not getattr(self, name).strip()]

    def validate(self):
        missing = self.missing_fields()
        if missing:
            raise MissingInputError(missing[0])


class ProcessingSession:
    def __init__(self, client_factory=GeminiClient):
        self.client_factory = client_factory
        self.clear()

    def clear(self):
        self.output_text = ""
        self.summary = ""
        self.has_processed = False
        self.in_flight = False
        self.last_signature = ""
        self.pending_signature = None
        self.latest_request = None
        self.connection_status = "unknown"

    def process(self, request, trigger="manual"):
        """Run one request, then any change that was parked while it ran.

        Returns the notices to show. Auto runs stay quiet except for the
        soft "auto-update failed" error.
        """
        self.latest_request = request
        try:
            request.validate()
        except MissingInputError as exc:
            if trigger == "manual":
                return [Notice.error(TITLE_ERROR, MISSING_MESSAGES[exc.field])]
            return []

        if self.in_flight:
            self.pending_signature = request.signature()
            LOGGER.info("event=process status=deferred trigger=%s", trigger)
            return []

        notices = self._attempt(request, trigger)
        next_request = self._take_pending()
        while next_request is not None:
            notices.extend(self._attempt(next_request, "auto"))
            next_request = self._take_pending()
        return notices

    def notify_change(self, request):
        """Re-run automatically when inputs change after a successful run."""
        self.latest_request = request
        if not self.has_processed or request.missing_fields():
            return []
        signature = request.signature()
        if signature == self.last_signature:
            return []
        if self.in_flight:
            # last write wins
            self.pending_signature = signature
            return []
        self.pending_signature = None
        return self.process(request, trigger="auto")

    def check_connection(self, settings):
        missing = settings.missing_fields()
        if missing:
            return [Notice.error(TITLE_ERROR, MISSING_MESSAGES[missing[0]])]
        client = self.client_factory(settings.api_endpoint, settings.api_key)
        try:
            client.check_connection()
        except ProcessingError as exc:
            LOGGER.warning("event=check_connection status=error reason=%s", exc.reason)
            self.connection_status = "disconnected"
            return [Notice.error(TITLE_CONNECTION_ERROR, MESSAGE_CONNECTION_ERROR)]
        self.connection_status = "connected"
        return [Notice.success(TITLE_CONNECTED, MESSAGE_CONNECTED)]

    def _attempt(self, request, trigger):
        signature = request.signature()
        self.in_flight = True
        LOGGER.info(
            "event=process status=starting trigger=%s sort_by=%s text_len=%d",
            trigger,
            request.options.sort_by,
            len(request.input_text),
        )
        try:
            client = self.client_factory(request.api_endpoint, request.api_key)
            raw = client.generate(build_request_text(request.options, request.input_text))
        except ProcessingError as exc:
            LOGGER.warning("event=process status=error trigger=%s reason=%s", trigger, exc.reason)
            self.summary = ""
            message = MESSAGE_PROCESSING_ERROR if trigger == "manual" else MESSAGE_AUTO_ERROR
            return [Notice.error(TITLE_PROCESSING_ERROR, message)]
        finally:
            self.in_flight = False

        self.output_text, self.summary = split_summary(raw)
        self.has_processed = True
        self.last_signature = signature
        LOGGER.info(
            "event=process status=finished trigger=%s output_len=%d has_summary=%s",
            trigger,
            len(self.output_text),
            bool(self.summary),
        )
        if trigger == "manual":
            return [Notice.success(TITLE_SUCCESS, MESSAGE_SUCCESS)]
        return []

    def _take_pending(self):
        if self.pending_signature is None:
            return None
        self.pending_signature = None
        request = self.latest_request
        if not self.has_processed or request is None or request.missing_fields():
            return None
        if request.signature() == self.last_signature:
            return None
        return request
