"""archgraph: depth-bounded architecture graph abstraction.

Layout:

- archgraph/processing   pre-processing, abstraction, merge/validation
- archgraph/violations   dependency-cycle projection
- archgraph/properties   domain and layer summaries
- archgraph/visualization  request-level composition of the views

The package never talks to a database; record sets are handed in by the
surrounding query layer.
"""

__version__ = "0.4.0"
