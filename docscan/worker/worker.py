import threading

from docscan.config.settings import Settings
from docscan.database.models import Document
from docscan.database.repositories.base import BaseDocumentStore
from docscan.logging.logger import Log
from docscan.worker.document_runner import DocumentRunner


class Worker:
    """Poll loop: scan -> process each record -> wait.

    One tick runs immediately, then one per poll interval. Ticks never
    overlap: the interval is waited out after a tick finishes, and a direct
    ``tick()`` call while another tick is running returns without work.
    """

    def __init__(
        self,
        store: BaseDocumentStore,
        runner: DocumentRunner,
        settings: Settings,
    ) -> None:
        self._store = store
        self._runner = runner
        self._settings = settings
        self._tick_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def tick(self) -> int:
        """Process every document that needs work. Returns how many were attempted."""
        if not self._tick_lock.acquire(blocking=False):
            Log.debug("Previous tick still running, skipping")
            return 0
        try:
            worklist = self._fetch_worklist()
            if not worklist:
                Log.debug("No documents need processing")
                return 0
            Log.info(f"Found {len(worklist)} documents needing processing")
            succeeded = sum(1 for document in worklist if self._runner.run(document))
            Log.info(f"Tick finished: {succeeded}/{len(worklist)} documents completed")
            return len(worklist)
        finally:
            self._tick_lock.release()

    def run(self, max_ticks: int | None = None) -> None:
        """Foreground poll loop. Runs until interrupted or stopped.

        If max_ticks is set, stop after that many ticks (for testing).
        """
        Log.info("Worker started, polling for documents")
        self._stop_event.clear()
        self._recover_stale_processing()
        try:
            self._loop(max_ticks)
        except KeyboardInterrupt:
            Log.info("Worker shutting down gracefully")

    def start(self) -> None:
        """Run the poll loop on a background thread."""
        if self.is_running:
            raise RuntimeError("Worker is already running")
        self._stop_event.clear()
        self._recover_stale_processing()
        self._thread = threading.Thread(target=self._loop, name="docscan-worker", daemon=True)
        self._thread.start()
        Log.info("Worker started in background")

    def stop(self, timeout: float | None = None) -> None:
        """Signal the loop to exit and wait for the current tick to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                Log.warning("Worker thread did not stop within timeout")
            else:
                self._thread = None
        Log.info("Worker stopped")

    def _loop(self, max_ticks: int | None = None) -> None:
        ticks = 0
        while not self._stop_event.is_set():
            self._safe_tick()
            ticks += 1
            if max_ticks is not None and ticks >= max_ticks:
                break
            if self._stop_event.wait(self._settings.worker_poll_interval_seconds):
                break

    def _safe_tick(self) -> None:
        try:
            self.tick()
        except Exception as exc:
            Log.exception(f"Tick aborted: {exc}")

    def _fetch_worklist(self) -> list[Document]:
        """Scan the store for work. Gracefully handle store errors."""
        try:
            return self._store.list_needing_processing()
        except Exception as exc:
            Log.warning(f"Record store error, will retry next tick: {exc}")
            return []

    def _recover_stale_processing(self) -> None:
        try:
            recovered = self._store.recover_stale_processing()
        except Exception as exc:
            Log.warning(f"Could not recover stale documents: {exc}")
            return
        if recovered:
            Log.info(f"Returned {recovered} stale processing documents to pending")
