"""petflow-desktop CLI 命令。"""
