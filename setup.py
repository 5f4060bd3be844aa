#!/usr/bin/python
from setuptools import setup, find_namespace_packages

setup(
      name='shecret',
      version='0.3.0',
      description='SSH/SFTP connection manager',
      author='shecret developers',
      license='MIT',
      # shecret 下的子目录没有 __init__.py，按命名空间包收集
      packages=find_namespace_packages(include=["shecret", "shecret.*"]),
      include_package_data=True,
      zip_safe=False,
      # 安装依赖的其他包
      install_requires = [
        "click>=8.0",
        "rich",
        "PyYAML",
        "Jinja2",
        "marshmallow-dataclass>=8.6",
        "tenacity",
        "paramiko>=3.2",
        "cryptography>=40",
        "bcrypt",
        "pyperclip",
      ],
      extras_require={
        "test": ["pytest"],
      },
    # 设置程序的入口
    entry_points={
        'console_scripts':[
            'shecret = shecret.cli:main'
        ]
    },
    python_requires='>=3.8'
)
