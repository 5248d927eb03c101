"""
LifeX datawarehouse backend: master data with cascading archive/restore.
"""
