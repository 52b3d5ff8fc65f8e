import vedro
import vedro.plugins.deferrer as deferrer


class Config(vedro.Config):

    class Plugins(vedro.Config.Plugins):

        class Deferrer(deferrer.Deferrer):
            # temporary stackvo roots and test servers are torn down through vedro.defer
            enabled = True
