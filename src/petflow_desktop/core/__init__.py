"""petflow-desktop 核心模块：配置、错误类型、外部命令构建。"""
