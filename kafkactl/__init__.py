"""kafkactl: Kafka command-line client with Kubernetes-mediated execution."""

__version__ = "0.1.0"
