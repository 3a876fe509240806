"""ffmpegcmd utility modules: option serialization and filter expression composition"""
