"""Test fixtures for SplitAPI tests.

This module provides sample Swagger/OpenAPI documents used across the test
suite. Definition names follow the dotted namespace convention of .NET
generated Swagger documents.
"""

# Swagger 2.0 document with three namespaces and cross-namespace references
NAMESPACED_SWAGGER_SPEC = {
    'swagger': '2.0',
    'info': {'title': 'Corax API', 'version': 'v1'},
    'paths': {},
    'definitions': {
        'Corax.Core.Inbound.ReceiptModel': {
            'type': 'object',
            'required': ['id'],
            'properties': {
                'id': {'type': 'integer', 'format': 'int32'},
                'receivedOn': {'type': 'string', 'format': 'date-time'},
                'status': {'$ref': '#/definitions/Corax.Core.Inbound.ReceiptStatus'},
                'lines': {
                    'type': 'array',
                    'items': {'$ref': '#/definitions/Corax.Core.Inbound.ReceiptLineModel'},
                },
                'supplier': {'$ref': '#/definitions/Corax.Core.Parties.SupplierModel'},
            },
        },
        'Corax.Core.Inbound.ReceiptLineModel': {
            'type': 'object',
            'properties': {
                'quantity': {'type': 'number', 'format': 'double'},
                'article': {'$ref': '#/definitions/Corax.Core.Articles.ArticleModel'},
            },
        },
        'Corax.Core.Inbound.ReceiptStatus': {
            'type': 'string',
            'enum': ['Open', 'Closed'],
        },
        'Corax.Core.Parties.SupplierModel': {
            'type': 'object',
            'properties': {
                'name': {'type': 'string'},
                'attributes': {
                    'type': 'object',
                    'additionalProperties': {
                        '$ref': '#/definitions/Corax.Core.Parties.AttributeValue'
                    },
                },
            },
        },
        'Corax.Core.Parties.AttributeValue': {
            'type': 'object',
            'properties': {'value': {'type': 'string'}},
        },
        'Corax.Core.Articles.ArticleModel': {
            'type': 'object',
            'properties': {
                'code': {'type': 'string'},
                'unit': {
                    'allOf': [{'$ref': '#/definitions/Corax.Core.Articles.UnitModel'}]
                },
            },
        },
        'Corax.Core.Articles.UnitModel': {
            'type': 'object',
            'properties': {'code': {'type': 'string'}},
        },
        'ProblemDetails': {
            'type': 'object',
            'properties': {
                'title': {'type': 'string'},
                'status': {'type': 'integer'},
            },
        },
    },
}

# OpenAPI 3 document using components/schemas, anyOf and oneOf
OPENAPI3_SPEC = {
    'openapi': '3.0.1',
    'info': {'title': 'Shop API', 'version': '2.1.0'},
    'paths': {},
    'components': {
        'schemas': {
            'Shop.Orders.Order': {
                'type': 'object',
                'required': ['id', 'payment'],
                'properties': {
                    'id': {'type': 'string', 'format': 'uuid'},
                    'payment': {
                        'oneOf': [
                            {'$ref': '#/components/schemas/Shop.Payments.Card'},
                            {'$ref': '#/components/schemas/Shop.Payments.Invoice'},
                        ]
                    },
                    'note': {'type': 'string', 'nullable': True},
                },
            },
            'Shop.Payments.Card': {
                'type': 'object',
                'properties': {'number': {'type': 'string'}},
            },
            'Shop.Payments.Invoice': {
                'type': 'object',
                'properties': {
                    'address': {
                        'anyOf': [
                            {'$ref': '#/components/schemas/Shop.Customers.Address'},
                            {'type': 'string'},
                        ]
                    }
                },
            },
            'Shop.Customers.Address': {
                'type': 'object',
                'properties': {'street': {'type': 'string'}},
            },
        }
    },
}

# Two definitions referencing each other
CYCLIC_SWAGGER_SPEC = {
    'swagger': '2.0',
    'info': {'title': 'Cyclic API', 'version': '1.0.0'},
    'paths': {},
    'definitions': {
        'Tree.Node': {
            'type': 'object',
            'properties': {
                'parent': {'$ref': '#/definitions/Tree.Edge'},
                'children': {
                    'type': 'array',
                    'items': {'$ref': '#/definitions/Tree.Node'},
                },
            },
        },
        'Tree.Edge': {
            'type': 'object',
            'properties': {'target': {'$ref': '#/definitions/Tree.Node'}},
        },
    },
}

# A definition referencing a name the document does not define
DANGLING_SWAGGER_SPEC = {
    'swagger': '2.0',
    'info': {'title': 'Dangling API', 'version': '1.0.0'},
    'paths': {},
    'definitions': {
        'App.Holder': {
            'type': 'object',
            'properties': {
                'missing': {'$ref': '#/definitions/App.Missing'},
                'external': {'$ref': 'other.json#/definitions/Thing'},
            },
        },
    },
}

EMPTY_SWAGGER_SPEC = {
    'swagger': '2.0',
    'info': {'title': 'Empty API', 'version': '1.0.0'},
    'paths': {},
}
