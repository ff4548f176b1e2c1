"""Domain packages - schemas, repositories, services and routers per area"""
