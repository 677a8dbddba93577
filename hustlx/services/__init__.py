"""Domain services used by the route blueprints"""
