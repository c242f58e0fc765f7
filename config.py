import os
import mysql.connector
from mysql.connector import pooling
from dotenv import load_dotenv

from core.storage import MySQLStorage
from advisor.gateway import AdvisorGateway, DEFAULT_MODEL

load_dotenv()

class Config:
    SECRET_KEY = os.getenv('SECRET_KEY')
    MYSQL_HOST = os.getenv('MYSQL_HOST')
    MYSQL_USER = os.getenv('MYSQL_USER')
    MYSQL_PASSWORD = os.getenv('MYSQL_PASSWORD')
    MYSQL_DATABASE = os.getenv('MYSQL_DATABASE', 'budget_db')
    GEMINI_API_KEY = os.getenv('GEMINI_API_KEY')
    GEMINI_MODEL = os.getenv('GEMINI_MODEL', DEFAULT_MODEL)
    ADVISOR_TIMEOUT = float(os.getenv('ADVISOR_TIMEOUT', '30'))
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    WTF_CSRF_ENABLED = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    @staticmethod
    def init_db(app):
        app.db_pool = mysql.connector.pooling.MySQLConnectionPool(
            pool_name="budget_pool",
            pool_size=5,
            host=Config.MYSQL_HOST,
            user=Config.MYSQL_USER,
            password=Config.MYSQL_PASSWORD,
            database=Config.MYSQL_DATABASE
        )
        app.storage = MySQLStorage(app.db_pool)

    @staticmethod
    def init_advisor(app):
        app.advisor = AdvisorGateway.from_api_key(
            app.config.get('GEMINI_API_KEY'),
            model=app.config.get('GEMINI_MODEL', DEFAULT_MODEL),
            timeout=app.config.get('ADVISOR_TIMEOUT', 30.0)
        )
