"""API subpackage for the model serving service.

Routes expose one predict endpoint per model signature and the Swagger
document describing them. They stay thin layers over the ``ModelManager``
to keep business logic out of transport code.
"""
