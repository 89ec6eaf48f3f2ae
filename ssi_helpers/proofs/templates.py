import os
import copy
import json
import time
import logging
import threading
from enum import Enum
from typing import Optional

from ssi_helpers.errors.exceptions import ConfigurationError, SchemaLoadError


logger = logging.getLogger(__name__)


class _VersionStamp:
    """Millisecond timestamps that strictly increase within the process"""

    __lock = threading.Lock()
    __last = 0

    @classmethod
    def next(cls) -> int:
        with cls.__lock:
            stamp = max(int(time.time() * 1000), cls.__last + 1)
            cls.__last = stamp
            return stamp


def unique_version(version: str) -> str:
    """Keep issued proof requests unique: agent caches schemas by name and version"""
    return '{}{}'.format(version, _VersionStamp.next())


def check_template_path(path: str, what: str = 'proof schema file') -> str:
    if not path or type(path) is not str:
        raise ConfigurationError(f'Invalid path to {what}')
    if os.path.splitext(path)[1].lower() != '.json':
        raise ConfigurationError(f'File {path} is not a json file!')
    if not os.path.exists(path):
        raise ConfigurationError(f'File {path} does not exist')
    return path


def validate_template(template) -> dict:
    if not isinstance(template, dict):
        raise SchemaLoadError('Invalid proof schema: expected JSON object')
    for field in ('name', 'version'):
        if not template.get(field) or type(template[field]) is not str:
            raise SchemaLoadError(f'Invalid proof schema: "{field}" must be non-empty string')
    attributes = template.get('requested_attributes')
    if attributes is not None:
        if not isinstance(attributes, dict):
            raise SchemaLoadError('Invalid proof schema: "requested_attributes" must be mapping')
        for key, attr in attributes.items():
            if not isinstance(attr, dict) or not attr.get('name') or type(attr['name']) is not str:
                raise SchemaLoadError(f'Invalid proof schema: requested attribute "{key}" has no name')
    return template


def load_template(path: str) -> dict:
    logger.info(f'Loading proof schema: {path}')
    try:
        with open(path, 'rb') as f:
            raw = f.read()
    except OSError as e:
        raise SchemaLoadError(f'Could not read proof schema {path}: {e}') from e
    try:
        template = json.loads(raw.decode('utf-8'))
    except ValueError as e:
        raise SchemaLoadError(f'Proof schema {path} is not valid JSON: {e}') from e
    return validate_template(template)


class TemplateCell:
    """Proof schema template loaded once on first use

    Loading is idempotent: concurrent first uses may read the file twice,
    both reads give the same value
    """

    class State(Enum):
        UNLOADED = 'unloaded'
        LOADED = 'loaded'

    def __init__(self, path: str):
        self.__path = path
        self.__template: Optional[dict] = None
        self.__state = self.State.UNLOADED

    @property
    def path(self) -> str:
        return self.__path

    @property
    def state(self) -> "TemplateCell.State":
        return self.__state

    def get(self) -> dict:
        """Loaded template, must not be modified by caller"""
        if self.__state is self.State.UNLOADED:
            template = load_template(self.__path)
            self.__template = template
            self.__state = self.State.LOADED
        return self.__template

    def copy(self) -> dict:
        return copy.deepcopy(self.get())
