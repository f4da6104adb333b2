"""
MiniRDBMS REST API Server
Provides HTTP interface to a single Database
"""

import logging
import os
import time

from flask import Flask, current_app, jsonify, request
from flask_cors import CORS

from minirdbms import __version__
from minirdbms.database import Database
from minirdbms.errors import (
    ConstraintError,
    ExecutionError,
    MiniRDBMSError,
    ParseError,
    SchemaError,
    StorageError,
    TableNotFoundError,
)
from minirdbms.storage import FileStore
from minirdbms.types import QueryResult

logger = logging.getLogger(__name__)

STATUS_CODES = (
    (TableNotFoundError, 404),
    (StorageError, 500),
    (ParseError, 400),
    (SchemaError, 400),
    (ConstraintError, 400),
    (ExecutionError, 400),
)


def _status_for(error: MiniRDBMSError) -> int:
    for error_type, status in STATUS_CODES:
        if isinstance(error, error_type):
            return status
    return 400


def _error_body(error: MiniRDBMSError, **extra):
    body = {
        'success': False,
        'error': str(error),
        'error_type': type(error).__name__,
    }
    body.update(extra)
    return body


def _database() -> Database:
    return current_app.extensions['minirdbms']


def _run(query: str) -> QueryResult:
    start_time = time.time()
    value = _database().execute(query)
    return QueryResult.from_value(value, execution_time=time.time() - start_time)


def create_app(database: Database = None, data_dir: str = None) -> Flask:
    """Build the Flask app around one explicitly owned Database"""
    app = Flask(__name__)
    CORS(app)

    if database is None:
        data_dir = data_dir or os.environ.get('MINIRDBMS_DATA_DIR', './data')
        database = Database(FileStore(data_dir))
    app.extensions['minirdbms'] = database

    # ==================== QUERY EXECUTION ENDPOINTS ====================

    @app.route('/api/execute', methods=['POST'])
    def execute_query():
        """Execute one query"""
        data = request.get_json(silent=True)
        if not data or not isinstance(data, dict):
            return jsonify({
                'success': False,
                'error': 'Request body required'
            }), 400

        query = data.get('query', '')
        if not query or not isinstance(query, str):
            return jsonify({
                'success': False,
                'error': 'Query required'
            }), 400

        return jsonify(_run(query).to_dict())

    @app.route('/api/execute/batch', methods=['POST'])
    def execute_batch_queries():
        """Execute queries in order, stopping at the first failure"""
        data = request.get_json(silent=True)
        queries = data.get('queries') if isinstance(data, dict) else None

        if (not queries or not isinstance(queries, list)
                or not all(isinstance(query, str) for query in queries)):
            return jsonify({
                'success': False,
                'error': 'List of queries required'
            }), 400

        results = []
        for query in queries:
            try:
                results.append(_run(query).to_dict())
            except MiniRDBMSError as e:
                logger.info(f"Batch stopped at query {len(results)}: {e}")
                return jsonify(_error_body(
                    e, results=results, failed_index=len(results)
                )), _status_for(e)

        return jsonify({
            'success': True,
            'results': results,
            'count': len(results)
        })

    # ==================== TABLE ENDPOINTS ====================

    @app.route('/api/tables', methods=['GET'])
    def list_tables():
        """List tables"""
        tables = _database().list_tables()
        return jsonify({
            'success': True,
            'tables': tables,
            'count': len(tables)
        })

    @app.route('/api/tables/<table_name>', methods=['GET'])
    def get_table_info(table_name):
        """Get table schema and stats"""
        table = _database().get_table(table_name)
        return jsonify({
            'success': True,
            'table': table_name,
            'schema': [col.to_dict() for col in table.columns],
            'stats': table.get_stats()
        })

    @app.route('/api/tables/<table_name>/indexes', methods=['GET'])
    def list_table_indexes(table_name):
        """List indexes for a table without saving a snapshot"""
        indexes = [info.to_dict() for info in _database().get_table(table_name).show_indexes()]
        return jsonify({
            'success': True,
            'indexes': indexes,
            'count': len(indexes)
        })

    # ==================== HEALTH ====================

    @app.route('/api/health', methods=['GET'])
    def health_check():
        """Health check endpoint"""
        return jsonify({
            'status': 'healthy',
            'version': __version__,
            'table_count': len(_database().list_tables())
        })

    # ==================== ERROR HANDLERS ====================

    @app.errorhandler(MiniRDBMSError)
    def engine_error(error):
        if isinstance(error, StorageError):
            logger.error(f"Storage failure: {error}")
        return jsonify(_error_body(error)), _status_for(error)

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({
            'success': False,
            'error': 'Endpoint not found'
        }), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({
            'success': False,
            'error': 'Method not allowed'
        }), 405

    return app
