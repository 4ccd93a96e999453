"""
mongo_api.api.routers

HTTP routers mounted by `mongo_api.api.app.create_app`.
"""
