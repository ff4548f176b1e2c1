"""Teams domain - team roster and membership management"""
