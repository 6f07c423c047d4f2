"""
Record Store Module.

Read-only, id-keyed collections of users and movies shared by all
aggregation workers.
"""
