"""
JSON schema for dialogue tree documents.
"""

_OPTIONAL_STRING = {'type': ['string', 'null']}

CHOICE_SCHEMA = {
    'type': 'object',
    'required': ['text'],
    'properties': {
        'text': {'type': 'string'},
        'condition': _OPTIONAL_STRING,
        'action': _OPTIONAL_STRING,
        'next': _OPTIONAL_STRING,
    },
}

CONVERSATION_SCHEMA = {
    'type': 'object',
    'required': ['text'],
    'properties': {
        'text': {'type': 'string', 'minLength': 1},
        'choices': {
            'type': ['array', 'null'],
            'items': CHOICE_SCHEMA,
        },
        'next': _OPTIONAL_STRING,
        'action': _OPTIONAL_STRING,
    },
}

DIALOGUE_SCHEMA = {
    '$schema': 'http://json-schema.org/draft-07/schema#',
    'type': 'object',
    'required': ['conversations'],
    'anyOf': [
        {'required': ['npc_id']},
        {'required': ['id']},
    ],
    'properties': {
        'npc_id': {'type': 'string', 'minLength': 1},
        'id': {'type': 'string', 'minLength': 1},
        'conversations': {
            'type': 'object',
            'minProperties': 1,
            'additionalProperties': CONVERSATION_SCHEMA,
        },
    },
}
