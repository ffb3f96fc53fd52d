from dataclasses import dataclass,field


@dataclass
class QuantCfg:
    block_height:int=8
    block_width:int=8
    n_vectors:int=64
    max_iterations:int=100


@dataclass
class ServerCfg:
    host:str="127.0.0.1"
    port:int=8080


@dataclass
class MainCfg:
    log_level:str="INFO"
    image_format:str="PNG"
    quant:QuantCfg=field(default_factory=QuantCfg)
    server:ServerCfg=field(default_factory=ServerCfg)
