"""HTTP routes for docserver"""
