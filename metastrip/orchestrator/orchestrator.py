from pathlib import Path

from metastrip.codec.file_codec import FileCodec
from metastrip.codec.models import ImageFile, SerializedFile
from metastrip.config.settings import Settings
from metastrip.logging.logger import Log
from metastrip.orchestrator.download import (
    BaseDownloadSink,
    DirectoryDownloadSink,
    cleaned_filename,
)
from metastrip.orchestrator.exceptions import (
    DownloadError,
    FileSourceError,
    FileValidationError,
    RateLimitError,
    RemoteError,
    UploadError,
)
from metastrip.orchestrator.models import OrchestratorState, RateLimitStatus
from metastrip.orchestrator.validator import (
    ALLOWED_MIME_TYPES,
    MAX_FILE_SIZE_BYTES,
    validate_image_file,
)
from metastrip.pickers.base import BaseFilePicker
from metastrip.pickers.exceptions import PickerError
from metastrip.ratelimit.limiter import Operation, RateLimiters
from metastrip.remote.base import BaseMetadataService
from metastrip.remote.exceptions import RemoteRateLimitError, RemoteServiceError
from metastrip.remote.factory import MetadataServiceFactory
from metastrip.remote.models import ImageMetadata
from metastrip.session.base import BaseSessionStore
from metastrip.session.factory import SessionStoreFactory
from metastrip.session.models import Session

REMOTE_RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please wait a moment before trying again."

OPERATION_LABELS: dict[Operation, str] = {
    Operation.INSPECT: "metadata view",
    Operation.STRIP: "strip",
}


class UploadOrchestrator:
    """Sequences validation, persistence and the remote operations.

    States: EMPTY -> SELECTED -> {INSPECTING | STRIPPING} -> SELECTED, with
    an independent single-slot ``error``. Each selected file opens a new
    generation; a remote call that completes after its generation ended
    (reset or another file chosen) is discarded.

    User-facing failures never propagate out of the public operations:
    they land in ``error`` and the operation returns a falsy value.
    """

    def __init__(
        self,
        *,
        store: BaseSessionStore,
        codec: FileCodec,
        service: BaseMetadataService,
        limiters: RateLimiters,
        download_sink: BaseDownloadSink,
        max_file_size_bytes: int = MAX_FILE_SIZE_BYTES,
        allowed_mime_types: tuple[str, ...] = ALLOWED_MIME_TYPES,
    ) -> None:
        self._store = store
        self._codec = codec
        self._service = service
        self._limiters = limiters
        self._download_sink = download_sink
        self._max_file_size_bytes = max_file_size_bytes
        self._allowed_mime_types = allowed_mime_types

        self._generation = 0
        self._file: ImageFile | None = None
        self._serialized: SerializedFile | None = None
        self._metadata: ImageMetadata | None = None
        self._preview_url: str | None = None
        self._error: UploadError | None = None
        self._busy: list[Operation] = []

    @property
    def state(self) -> OrchestratorState:
        if self._file is None:
            return OrchestratorState.EMPTY
        if not self._busy:
            return OrchestratorState.SELECTED
        if self._busy[-1] is Operation.STRIP:
            return OrchestratorState.STRIPPING
        return OrchestratorState.INSPECTING

    @property
    def error(self) -> UploadError | None:
        return self._error

    @property
    def file(self) -> ImageFile | None:
        return self._file

    @property
    def metadata(self) -> ImageMetadata | None:
        return self._metadata

    @property
    def preview_url(self) -> str | None:
        return self._preview_url

    def is_busy(self, operation: Operation) -> bool:
        return operation in self._busy

    def rate_limit_status(self, operation: Operation) -> RateLimitStatus:
        limiter = self._limiters.for_operation(operation)
        return RateLimitStatus(
            remaining=limiter.remaining(),
            retry_after_seconds=limiter.retry_after_seconds(),
        )

    def dismiss_error(self) -> None:
        self._error = None

    async def restore(self) -> bool:
        """Resume the saved session, if any. Call before any user action."""
        if self.state is not OrchestratorState.EMPTY:
            Log.warning("Skipping session restore: a file is already selected")
            return False
        generation = self._generation
        session = await self._store.load()
        if generation != self._generation:
            Log.info("Discarding saved session: another file was chosen while loading it")
            return False
        if session is None:
            return False
        file = self._codec.decode(session.file)
        if file is None:
            Log.warning("Saved session holds an unusable file, discarding it")
            await self._store.clear()
            return False
        self._start_generation()
        self._file = file
        self._serialized = session.file
        self._metadata = session.metadata
        self._preview_url = session.file.data_url
        Log.info(f"Restored saved session for '{file.name}'")
        return True

    async def select(self, file: ImageFile) -> bool:
        """Validate, persist and display a newly chosen file."""
        try:
            validate_image_file(file, self._allowed_mime_types, self._max_file_size_bytes)
        except FileValidationError as exc:
            self._fail(exc)
            return False

        generation = self._start_generation()
        serialized = await self._codec.encode(file)
        if generation != self._generation:
            Log.info(f"Selection of '{file.name}' was superseded before it was stored")
            return False

        self._file = file
        self._serialized = serialized
        self._preview_url = serialized.data_url
        Log.info(f"Selected '{file.name}' ({file.size} bytes, {file.mime_type})")
        await self._store.save(Session(file=serialized, metadata=None))
        return True

    async def select_from(self, picker: BaseFilePicker) -> bool:
        """Take a file from any picker and select it."""
        try:
            file = await picker.choose()
        except PickerError as exc:
            self._fail(FileSourceError(str(exc)))
            return False
        if file is None:
            Log.debug("File selection cancelled")
            return False
        return await self.select(file)

    async def inspect(self) -> ImageMetadata | None:
        """Fetch the current file's metadata and attach it to the session."""
        file, serialized = self._file, self._serialized
        if file is None or serialized is None:
            return None
        if not self._begin(Operation.INSPECT):
            return None

        generation = self._generation
        try:
            metadata = await self._service.inspect(file)
        except RemoteServiceError as exc:
            self._fail_remote(exc, generation, Operation.INSPECT)
            return None
        finally:
            self._finish(Operation.INSPECT, generation)

        if generation != self._generation:
            Log.info(f"Discarding stale inspect result for '{file.name}'")
            return None
        self._metadata = metadata
        Log.info(f"Fetched metadata for '{file.name}' (has metadata: {metadata.has_metadata})")
        await self._store.save(Session(file=serialized, metadata=metadata))
        return metadata

    async def strip(self) -> Path | None:
        """Request a metadata-free copy and save it for download."""
        file = self._file
        if file is None:
            return None
        if not self._begin(Operation.STRIP):
            return None

        generation = self._generation
        try:
            content = await self._service.strip(file)
        except RemoteServiceError as exc:
            self._fail_remote(exc, generation, Operation.STRIP)
            return None
        finally:
            self._finish(Operation.STRIP, generation)

        if generation != self._generation:
            Log.info(f"Discarding stale strip result for '{file.name}'")
            return None
        try:
            path = await self._download_sink.save(cleaned_filename(file.name), content)
        except DownloadError as exc:
            if generation == self._generation:
                self._fail(exc)
            return None
        Log.info(f"Saved cleaned copy of '{file.name}' to {path}")
        return path

    async def reset(self) -> None:
        """Forget the current file everywhere and return to EMPTY."""
        self._start_generation()
        await self._store.clear()
        Log.info("Session reset")

    def _start_generation(self) -> int:
        self._generation += 1
        self._file = None
        self._serialized = None
        self._metadata = None
        self._preview_url = None
        self._error = None
        self._busy = []
        return self._generation

    def _begin(self, operation: Operation) -> bool:
        if operation in self._busy:
            Log.debug(f"{operation.value} already in progress, ignoring request")
            return False
        limiter = self._limiters.for_operation(operation)
        if not limiter.admit():
            retry_after = limiter.retry_after_seconds()
            self._fail(
                RateLimitError(
                    f"Too many {OPERATION_LABELS[operation]} requests. "
                    f"Please wait {retry_after} seconds before trying again.",
                    retry_after_seconds=retry_after,
                )
            )
            return False
        self._error = None
        self._busy.append(operation)
        return True

    def _finish(self, operation: Operation, generation: int) -> None:
        if generation == self._generation and operation in self._busy:
            self._busy.remove(operation)

    def _fail_remote(
        self, exc: RemoteServiceError, generation: int, operation: Operation
    ) -> None:
        if generation != self._generation:
            Log.info(f"Ignoring failure of stale {operation.value} request: {exc}")
            return
        if isinstance(exc, RemoteRateLimitError):
            self._fail(
                RateLimitError(
                    REMOTE_RATE_LIMIT_MESSAGE, retry_after_seconds=exc.retry_after_seconds
                )
            )
        else:
            self._fail(RemoteError(str(exc)))

    def _fail(self, error: UploadError) -> None:
        Log.warning(f"{type(error).__name__}: {error}")
        self._error = error


def build_orchestrator(
    settings: Settings,
    *,
    service: BaseMetadataService | None = None,
    store: BaseSessionStore | None = None,
) -> UploadOrchestrator:
    """Build an UploadOrchestrator with all configured collaborators."""
    return UploadOrchestrator(
        store=store if store is not None else SessionStoreFactory.create(settings),
        codec=FileCodec(),
        service=service if service is not None else MetadataServiceFactory.create(settings),
        limiters=RateLimiters.from_settings(settings),
        download_sink=DirectoryDownloadSink(Path(settings.download_dir)),
        max_file_size_bytes=settings.max_upload_size_bytes,
    )
