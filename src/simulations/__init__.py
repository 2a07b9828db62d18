"""Drivers, workloads and instrumentation around the partition_memory core."""
