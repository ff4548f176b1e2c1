"""ClientDesk - multi-tenant client and appointment management backend"""
