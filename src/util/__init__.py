"""
どこで: `util` パッケージ。
何を: 外部ファイル（YAML 構成）を扱う小さな補助関数群。
なぜ: `common.settings` から I/O の詳細を切り離すため。
"""
