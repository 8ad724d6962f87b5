"""Book and member management service.

HTTP handlers delegate to entity services that write to a relational primary
store and mirror each write into an Elasticsearch index in the background.
"""

__version__ = "0.1.0"
