from .awql import bind_params, quote, report_name, select_columns

__all__ = ["bind_params", "quote", "report_name", "select_columns"]
