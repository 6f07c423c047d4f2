"""
Pipeline stages for MovieLens OLAP.

Contains the modules a run passes through:
- Ingestion (MovieLens 100k flat files)
- Partitioner, Aggregator, Merger, Scheduler
- Ranking and report writing
"""
