"""
Prometheus metrics for the webhook listener.
"""
from prometheus_client import Counter, Histogram, Gauge, Info, CollectorRegistry
import psutil
import os


class Metrics:
    """
    Centralized metrics for the listener service.
    """

    def __init__(self, service_name: str = "listener", version: str = "0.1.0", registry=None):
        self.service_name = service_name
        self.version = version
        self.registry = registry or CollectorRegistry()

        # HTTP Metrics
        self.http_requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["service", "method", "path", "status"],
            registry=self.registry,
        )

        self.http_request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["service", "method", "path"],
            registry=self.registry,
        )

        self.http_requests_active = Gauge(
            "http_requests_active",
            "Number of active HTTP requests",
            ["service"],
            registry=self.registry,
        )
        self.http_requests_active.labels(service=service_name).set(0)

        # Application Info
        self.app_info = Info(
            "app",
            "Application information",
            registry=self.registry,
        )
        self.app_info.info({"service": service_name, "version": version})

        self.app_up = Gauge(
            "app_up",
            "Application up status (1=up, 0=down)",
            ["service", "version"],
            registry=self.registry,
        )
        self.app_up.labels(service=service_name, version=version).set(1)

        # Listener metrics
        self.ip_checks_total = Counter(
            "listener_ip_checks_total",
            "Source address checks by result",
            ["result"],
            registry=self.registry,
        )

        self.no_payload_total = Counter(
            "listener_requests_no_payload_total",
            "Requests rejected for carrying no payload",
            registry=self.registry,
        )

        self.events_total = Counter(
            "listener_events_total",
            "Handled webhook events by type",
            ["event_type"],
            registry=self.registry,
        )

        self.jobs_enqueued_total = Counter(
            "listener_jobs_enqueued_total",
            "Jobs pushed onto downstream queues",
            ["queue", "kind"],
            registry=self.registry,
        )

        self.recovered_errors_total = Counter(
            "listener_recovered_errors_total",
            "Payload errors recovered without failing the request",
            ["error"],
            registry=self.registry,
        )

        # System Metrics
        self._setup_process_metrics()

    def _setup_process_metrics(self):
        """Set up process-level metrics using psutil."""
        self.process_memory_bytes = Gauge(
            "process_resident_memory_bytes",
            "Resident memory size in bytes",
            ["service"],
            registry=self.registry,
        )

        self.process_open_fds = Gauge(
            "process_open_fds",
            "Number of open file descriptors",
            ["service"],
            registry=self.registry,
        )

        # Update system metrics
        self.update_system_metrics()

    def update_system_metrics(self):
        """Update system metrics from psutil."""
        try:
            process = psutil.Process(os.getpid())

            # Memory
            self.process_memory_bytes.labels(service=self.service_name).set(process.memory_info().rss)
            # File descriptors
            try:
                self.process_open_fds.labels(service=self.service_name).set(process.num_fds())
            except AttributeError:
                # num_fds() not available on all platforms
                pass
        except psutil.Error:
            pass

    def record_ip_check(self, valid: bool):
        self.ip_checks_total.labels(result="valid" if valid else "invalid").inc()

    def record_no_payload(self):
        self.no_payload_total.inc()

    def record_event(self, event_type: str):
        self.events_total.labels(event_type=event_type).inc()

    def record_job(self, queue: str, kind: str):
        self.jobs_enqueued_total.labels(queue=queue, kind=kind).inc()

    def record_recovered_error(self, error: str):
        self.recovered_errors_total.labels(error=error).inc()
