"""
Record Store
============

Persistence collaborator used by the builders to save campaigns,
automations, landing pages and templates.

Two backends share the same contract:
- SQLiteRecordStore: tables in BUILDER_DB (created by each module's models.py)
- HTTPRecordStore: a hosted REST backend reached with requests
"""

import json
import re
import sqlite3
import logging
import threading

import requests

from .config import get_config_value

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')


class PersistenceError(Exception):
    """Raised when a record cannot be stored or read back"""


class Database:
    # Serialises schema creation across request threads
    _lock = threading.Lock()

    @staticmethod
    def connect(path):
        return sqlite3.connect(path)

    @classmethod
    def execute_script(cls, path, statements):
        """Run DDL statements (CREATE TABLE / INDEX) against a database file"""
        with cls._lock:
            with cls.connect(path) as conn:
                cursor = conn.cursor()
                for statement in statements:
                    cursor.execute(statement)
                conn.commit()


def _check_identifier(name):
    if not name or not _IDENTIFIER.match(name):
        raise PersistenceError(f"Invalid identifier: {name!r}")
    return name


def _normalise_order_by(order_by):
    """Accept 'column', ('column', 'desc') or {'column': 'desc'}"""
    if not order_by:
        return None, None
    if isinstance(order_by, dict):
        if len(order_by) != 1:
            raise PersistenceError("order_by supports a single column")
        column, direction = next(iter(order_by.items()))
    elif isinstance(order_by, (tuple, list)):
        column, direction = order_by
    else:
        column, direction = order_by, 'asc'
    direction = str(direction).lower()
    if direction not in ('asc', 'desc'):
        raise PersistenceError(f"Invalid sort direction: {direction!r}")
    return _check_identifier(column), direction


class RecordStore:
    """Contract for the persistence collaborator"""

    def create_record(self, table, record):
        raise NotImplementedError

    def update_record(self, table, record_id, fields):
        raise NotImplementedError

    def get_record(self, table, record_id):
        raise NotImplementedError

    def list_records(self, table, where=None, order_by=None):
        raise NotImplementedError


class SQLiteRecordStore(RecordStore):
    """Record store over a local sqlite database"""

    def __init__(self, db_path):
        self.db_path = db_path

    def _columns(self, conn, table):
        cursor = conn.execute(f"PRAGMA table_info({_check_identifier(table)})")
        columns = [row[1] for row in cursor.fetchall()]
        if not columns:
            raise PersistenceError(f"Unknown table: {table}")
        return columns

    def _check_fields(self, conn, table, fields):
        columns = self._columns(conn, table)
        unknown = [key for key in fields if key not in columns]
        if unknown:
            raise PersistenceError(f"Unknown columns for {table}: {', '.join(sorted(unknown))}")

    def _fetch(self, conn, table, record_id):
        conn.row_factory = sqlite3.Row
        row = conn.execute(f"SELECT * FROM {table} WHERE id = ?", (record_id,)).fetchone()
        return dict(row) if row else None

    def create_record(self, table, record):
        if not record.get('id'):
            raise PersistenceError("Record must carry a caller-assigned id")
        try:
            with Database.connect(self.db_path) as conn:
                self._check_fields(conn, table, record)
                keys = list(record.keys())
                placeholders = ', '.join('?' for _ in keys)
                conn.execute(
                    f"INSERT INTO {table} ({', '.join(keys)}) VALUES ({placeholders})",
                    [record[k] for k in keys]
                )
                conn.commit()
                created = self._fetch(conn, table, record['id'])
            logger.info(f"Created {table} record {record['id']}")
            return created
        except sqlite3.Error as e:
            logger.error(f"Error creating {table} record: {e}")
            raise PersistenceError(f"Could not create {table} record: {e}") from e

    def update_record(self, table, record_id, fields):
        fields = {k: v for k, v in fields.items() if k != 'id'}
        try:
            with Database.connect(self.db_path) as conn:
                self._check_fields(conn, table, fields)
                columns = self._columns(conn, table)
                assignments = [f"{k} = ?" for k in fields]
                values = list(fields.values())
                if 'updated_at' in columns and 'updated_at' not in fields:
                    assignments.append("updated_at = CURRENT_TIMESTAMP")
                cursor = conn.execute(
                    f"UPDATE {table} SET {', '.join(assignments)} WHERE id = ?",
                    values + [record_id]
                )
                if cursor.rowcount == 0:
                    raise PersistenceError(f"No {table} record with id {record_id}")
                conn.commit()
                updated = self._fetch(conn, table, record_id)
            logger.info(f"Updated {table} record {record_id}")
            return updated
        except sqlite3.Error as e:
            logger.error(f"Error updating {table} record {record_id}: {e}")
            raise PersistenceError(f"Could not update {table} record: {e}") from e

    def get_record(self, table, record_id):
        try:
            with Database.connect(self.db_path) as conn:
                _check_identifier(table)
                return self._fetch(conn, table, record_id)
        except sqlite3.Error as e:
            logger.error(f"Error getting {table} record {record_id}: {e}")
            raise PersistenceError(f"Could not read {table} record: {e}") from e

    def list_records(self, table, where=None, order_by=None):
        where = where or {}
        column, direction = _normalise_order_by(order_by)
        try:
            with Database.connect(self.db_path) as conn:
                self._check_fields(conn, table, where)
                if column:
                    self._check_fields(conn, table, {column: None})
                conn.row_factory = sqlite3.Row
                sql = f"SELECT * FROM {table}"
                if where:
                    sql += " WHERE " + ' AND '.join(f"{k} = ?" for k in where)
                if column:
                    sql += f" ORDER BY {column} {direction.upper()}"
                rows = conn.execute(sql, list(where.values())).fetchall()
                return [dict(row) for row in rows]
        except sqlite3.Error as e:
            logger.error(f"Error listing {table} records: {e}")
            raise PersistenceError(f"Could not list {table} records: {e}") from e


def _response_data(resp):
    """The 'data' member of a record store reply; anything else is an error"""
    try:
        body = resp.json()
    except ValueError as e:
        raise PersistenceError(f"Record store returned invalid JSON: {e}") from e
    if not isinstance(body, dict):
        raise PersistenceError(f"Record store returned {type(body).__name__}, expected an object")
    return body.get('data')


class HTTPRecordStore(RecordStore):
    """Record store backed by a hosted REST API.

    Records live under {base_url}/tables/{table}/records and responses are
    wrapped in a {"data": ...} envelope.
    """

    def __init__(self, base_url, api_key=None, timeout=15):
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout

    def _headers(self):
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _url(self, table, record_id=None):
        url = f"{self.base_url}/tables/{_check_identifier(table)}/records"
        if record_id is not None:
            url += f"/{record_id}"
        return url

    def _request(self, method, url, **kwargs):
        try:
            resp = requests.request(method, url, headers=self._headers(), timeout=self.timeout, **kwargs)
            resp.raise_for_status()
            return _response_data(resp)
        except requests.RequestException as e:
            error_detail = ''
            if getattr(e, 'response', None) is not None:
                error_detail = e.response.text
            logger.error(f"Record store {method} {url} failed: {e} {error_detail}".strip())
            raise PersistenceError(f"Record store error: {e} {error_detail}".strip()) from e

    def create_record(self, table, record):
        if not record.get('id'):
            raise PersistenceError("Record must carry a caller-assigned id")
        return self._request('POST', self._url(table), json=record)

    def update_record(self, table, record_id, fields):
        return self._request('PATCH', self._url(table, record_id), json=fields)

    def get_record(self, table, record_id):
        try:
            resp = requests.get(self._url(table, record_id), headers=self._headers(), timeout=self.timeout)
            if resp.status_code == 404:
                return None
            resp.raise_for_status()
            return _response_data(resp)
        except requests.RequestException as e:
            logger.error(f"Record store GET {table}/{record_id} failed: {e}")
            raise PersistenceError(f"Record store error: {e}") from e

    def list_records(self, table, where=None, order_by=None):
        params = {}
        if where:
            params['where'] = json.dumps(where)
        column, direction = _normalise_order_by(order_by)
        if column:
            params['order_by'] = f"{column}:{direction}"
        return self._request('GET', self._url(table), params=params) or []


def get_record_store():
    """Build the configured record store (RECORD_STORE = sqlite | http)"""
    backend = (get_config_value('RECORD_STORE', 'sqlite') or 'sqlite').lower()
    if backend == 'http':
        base_url = get_config_value('RECORD_STORE_URL')
        if not base_url:
            raise PersistenceError("RECORD_STORE_URL is not configured")
        return HTTPRecordStore(
            base_url,
            api_key=get_config_value('RECORD_STORE_API_KEY'),
            timeout=int(get_config_value('RECORD_STORE_TIMEOUT', 15)),
        )
    if backend != 'sqlite':
        raise PersistenceError(f"Unknown record store backend: {backend}")
    return SQLiteRecordStore(get_config_value('BUILDER_DB'))
