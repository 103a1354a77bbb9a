"""Servicios compartidos: base de datos y Firebase"""
