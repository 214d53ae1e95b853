"""
Prometheus metrics for the event receiver.
"""
from prometheus_client import Counter, Histogram, Gauge, Info, CollectorRegistry
import psutil
import os


class Metrics:
    """
    Centralized metrics for the event receiver.
    """

    def __init__(self, service_name: str = "event-receiver", version: str = "0.1.0", registry=None):
        self.service_name = service_name
        self.version = version
        self.registry = registry or CollectorRegistry()

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

        # Consumer metrics
        self.messages_received_total = Counter(
            "receiver_messages_received_total",
            "Total messages delivered by the broker",
            registry=self.registry,
        )

        self.messages_total = Counter(
            "receiver_messages_total",
            "Messages by terminal outcome",
            ["outcome"],
            registry=self.registry,
        )

        self.events_rendered_total = Counter(
            "receiver_events_rendered_total",
            "Rendered events by importance",
            ["importance"],
            registry=self.registry,
        )

        self.decode_seconds = Histogram(
            "receiver_decode_seconds",
            "Decode duration in seconds",
            ["stage"],
            registry=self.registry,
        )

        self.message_size_bytes = Histogram(
            "receiver_message_size_bytes",
            "Message body size in bytes",
            buckets=(256, 1024, 4096, 16384, 65536, 262144),
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

        self.update_system_metrics()

    def update_system_metrics(self):
        """Update system metrics from psutil."""
        try:
            process = psutil.Process(os.getpid())
            self.process_memory_bytes.labels(service=self.service_name).set(process.memory_info().rss)
            try:
                self.process_open_fds.labels(service=self.service_name).set(process.num_fds())
            except AttributeError:
                # num_fds() not available on all platforms
                pass
        except psutil.Error:
            pass

    def record_received(self, size_bytes: int):
        """Record a delivered message."""
        self.messages_received_total.inc()
        self.message_size_bytes.observe(size_bytes)

    def record_outcome(self, outcome: str):
        """Record the terminal outcome of a message."""
        self.messages_total.labels(outcome=outcome).inc()

    def record_rendered(self, importance: str):
        """Record a rendered event."""
        self.events_rendered_total.labels(importance=importance).inc()

    def mark_down(self):
        """Flag the service as stopped."""
        self.app_up.labels(service=self.service_name, version=self.version).set(0)
