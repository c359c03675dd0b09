# src/authgateway/app/__init__.py
