"""被扫描的组件包"""
