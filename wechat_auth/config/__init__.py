"""
Configuration package for the WeChat OAuth strategy.
"""

from wechat_auth.config.wechat_config import WechatSettings, get_wechat_settings

__all__ = ["WechatSettings", "get_wechat_settings"]
